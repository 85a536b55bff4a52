from countdown_board import create_app, socketio

app = create_app()
 
if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, host='0.0.0.0', port=int(app.config.get('PORT', 3000)), allow_unsafe_werkzeug=True)
