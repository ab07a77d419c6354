"""
Call Service HTTP API

Run with:
    uvicorn flowguide.server:app --port 4000

Routes:
    GET  /      - service description
    POST /call  - {"to": "+15551234567"} places an outbound call
"""

from typing import Any

from fastapi import Body, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flowguide.audit import get_logger
from flowguide.config import get_settings
from flowguide.services.calls import (
    CallConfigurationError,
    CallService,
    CallServiceError,
)


logger = get_logger(__name__)

app = FastAPI(title="FlowGuide call service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_call_service() -> CallService:
    return CallService(get_settings().calls)


# --- ROUTES ---

@app.get("/")
def describe_service():
    return {"message": "Twilio call service (example). POST /call"}


@app.post("/call")
def create_call(
    payload: Any = Body(default=None),
    service: CallService = Depends(get_call_service),
):
    to = payload.get("to") if isinstance(payload, dict) else None
    if not to:
        return JSONResponse(status_code=400, content={"error": "Missing `to` phone number"})

    try:
        sid = service.place_call(str(to))
    except CallConfigurationError as e:
        return JSONResponse(status_code=500, content={"error": str(e)})
    except CallServiceError as e:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to create call", "details": str(e)},
        )

    return {"message": "Call initiated", "sid": sid}


def main() -> None:
    import uvicorn

    port = get_settings().app.server_port
    logger.info("call_server_starting", port=port)
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
