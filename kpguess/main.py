# kpguess/main.py
import os
from typing import Optional

from pydantic import BaseModel
from fastapi import FastAPI, HTTPException, BackgroundTasks

from .cli import play
from .config import Settings, parse_episode
from .errors import ConfigurationError, KPGuessError
from .runner import RunStatus

KPGUESS_SECRET = os.environ.get('KPGUESS_SECRET', 'dev-secret')

app = FastAPI(title='Kinopoisk Guess Game Bot')
app.state.status = None


class TaskRequest(BaseModel):
    episode: int
    secret: str


@app.get('/')
async def root():
    """Root endpoint - API information"""
    return {
        'service': 'Kinopoisk Guess Game Bot',
        'status': 'running',
        'version': '1.0.0',
        'endpoints': {
            'health': '/health',
            'task': 'POST /task',
            'status': '/status',
            'docs': '/docs'
        }
    }


@app.post('/task')
async def receive_task(req: TaskRequest, background_tasks: BackgroundTasks):
    """
    Start playing an episode in the background. Only one run at a time.
    """
    if req.secret != KPGUESS_SECRET:
        raise HTTPException(status_code=403, detail='Invalid secret')

    try:
        episode = parse_episode(req.episode)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    current: Optional[RunStatus] = app.state.status
    if current is not None and current.running:
        raise HTTPException(status_code=409, detail=f'Episode {current.episode} is already being played')

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    status = RunStatus(episode=episode, running=True)
    app.state.status = status
    background_tasks.add_task(run_bot, settings, episode, status)
    return {'status': 'accepted', 'message': f'Episode {episode} queued for play'}


async def run_bot(settings: Settings, episode: int, status: RunStatus):
    """
    Background task: play until the pool is exhausted or an error stops us.
    """
    try:
        await play(settings, episode, status)
        print(f"Episode {episode} finished after {status.sessions_started} sessions")
    except KPGuessError as e:
        status.error = status.error or f"{type(e).__name__}: {e}"
        print(f"Run for episode {episode} stopped: {e}")
    finally:
        status.running = False


@app.get('/status')
async def run_status():
    """Counters of the current (or last) run."""
    status: Optional[RunStatus] = app.state.status
    if status is None:
        return {'running': False, 'run': None}
    return {'running': status.running, 'run': status.to_dict()}


@app.get('/health')
async def health_check():
    """Health check endpoint."""
    return {'status': 'healthy'}


if __name__ == '__main__':
    import uvicorn
    uvicorn.run('kpguess.main:app', host='0.0.0.0', port=8000)
