from typing import Optional


_sweeper_started = False


def sweep_once(board, now: Optional[int] = None) -> int:
    """Run one expiry pass over the board.

    Persists and broadcasts the active list only when something was removed.
    """
    now = board.now() if now is None else now
    removed = board.registry.sweep_expired(now, board.grace_ms)
    if removed == 0:
        return 0
    board.persist()
    board.gateway.broadcast_list(board.registry.active_items(now))
    board.logger.info(f"[sweep] removed={removed} remaining={len(board.registry)}")
    return removed


def start_sweeper(app, board) -> bool:
    """Start the background expiry loop for this process.

    - No-ops in TESTING mode unless ENABLE_SWEEPER_IN_TESTS is set
    - Starts at most one loop per process
    - A failing tick is logged and the loop keeps going
    """
    global _sweeper_started
    if app.config.get('TESTING') and not app.config.get('ENABLE_SWEEPER_IN_TESTS'):
        return False
    if _sweeper_started or board.socketio is None:
        return False
    _sweeper_started = True

    interval = max(1, int(app.config.get('SWEEP_INTERVAL_SEC', 60)))
    app.logger.info(f"[sweeper-start] interval={interval}s grace={board.grace_ms}ms")

    def _worker():
        while True:
            board.socketio.sleep(interval)
            try:
                sweep_once(board)
            except Exception:
                app.logger.exception("[sweep-failed]")

    board.socketio.start_background_task(_worker)
    return True
