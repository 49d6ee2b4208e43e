"""
Local FastAPI server for the HybridPlanner functions.
Mounts each serverless handler under /api/<name> (and the Netlify-style
/.netlify/functions/<name>) so the static site can be pointed at it.
"""

import sys
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api import create_checkout, generate_plan, send_email, verify_session  # noqa: E402
from api._shared import HandlerRequest  # noqa: E402

FUNCTIONS = {
    "generate-plan": generate_plan.handler,
    "create-checkout": create_checkout.handler,
    "verify-session": verify_session.handler,
    "send-email": send_email.handler,
}
METHODS = ["GET", "POST", "OPTIONS", "PUT", "DELETE"]

app = FastAPI(title="HybridPlanner Functions", version="1.0.0")


@app.get("/health")
def health_check():
    return {"status": "healthy", "functions": sorted(FUNCTIONS)}


async def _dispatch(name: str, request: Request):
    handler = FUNCTIONS.get(name)
    if handler is None:
        raise HTTPException(status_code=404, detail=f"Unknown function: {name}")
    body = await request.body()
    shaped = HandlerRequest(
        method=request.method,
        headers=dict(request.headers),
        body=body,
        query=dict(request.query_params),
    )
    # Handlers block on network calls
    return await run_in_threadpool(handler, shaped)


@app.api_route("/api/{name}", methods=METHODS)
async def api_function(name: str, request: Request):
    return await _dispatch(name, request)


@app.api_route("/.netlify/functions/{name}", methods=METHODS)
async def netlify_function(name: str, request: Request):
    return await _dispatch(name, request)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8888)
