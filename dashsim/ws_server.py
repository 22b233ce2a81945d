import asyncio, base64, logging
from typing import Optional

from fastapi import FastAPI, HTTPException, WebSocket
from pydantic import BaseModel, Field
from starlette.websockets import WebSocketDisconnect

from .analysis import system_report
from .config import CFG, FRAME_S
from .simulation import Simulation
from .state import ConfigStore, InvalidConfiguration, MEASURES
from .surface import Surface

log = logging.getLogger("dashsim.ws")

app = FastAPI(title="dashsim")


class ServerIn(BaseModel):
    cpu: Optional[int] = Field(None, ge=1, le=32)
    ram_gb: Optional[int] = Field(None, ge=1, le=128)
    bandwidth_mbps: Optional[int] = Field(None, ge=1, le=10000)
    storage_gb: Optional[int] = Field(None, ge=1, le=2000)


class SecurityIn(BaseModel):
    fail2ban: Optional[bool] = None
    pfsense: Optional[bool] = None
    cloudflare: Optional[bool] = None
    load_balancer: Optional[bool] = None
    waf: Optional[bool] = None


class AttackIn(BaseModel):
    intensity: int = Field(..., ge=0, le=100)


def _given(model: BaseModel) -> dict:
    return model.model_dump(exclude_none=True)

def _sim() -> Simulation:
    return app.state.sim


@app.on_event("startup")
async def _startup():
    # surface lifecycle belongs to the presentation side
    app.state.surface = Surface(CFG.surface_w, CFG.surface_h)
    app.state.sim = Simulation(ConfigStore(), app.state.surface)

@app.on_event("shutdown")
async def _shutdown():
    sim = getattr(app.state, "sim", None)
    if sim:
        sim.stop()
    surface = getattr(app.state, "surface", None)
    if surface:
        surface.close()


@app.get("/api/state")
async def get_state():
    return _sim().frame()

@app.put("/api/server")
async def put_server(body: ServerIn):
    try:
        snap = _sim().store.update_server(**_given(body))
    except InvalidConfiguration as e:
        raise HTTPException(status_code=422, detail=str(e))
    return snap.as_dict()

@app.put("/api/security")
async def put_security(body: SecurityIn):
    try:
        snap = _sim().store.set_security(**_given(body))
    except InvalidConfiguration as e:
        raise HTTPException(status_code=422, detail=str(e))
    return snap.as_dict()

@app.post("/api/security/{measure}/toggle")
async def toggle_measure(measure: str):
    if measure not in MEASURES:
        raise HTTPException(status_code=404, detail=f"unknown measure: {measure}")
    return _sim().store.toggle(measure).as_dict()

@app.put("/api/attack")
async def put_attack(body: AttackIn):
    try:
        snap = _sim().store.set_attack_intensity(body.intensity)
    except InvalidConfiguration as e:
        raise HTTPException(status_code=422, detail=str(e))
    return snap.as_dict()

@app.post("/api/sim/start")
async def sim_start():
    _sim().start()
    return {"state": _sim().state.value}

@app.post("/api/sim/stop")
async def sim_stop():
    _sim().stop()
    return {"state": _sim().state.value}

@app.get("/api/history")
async def get_history():
    # chart: values only, fixed y range
    return {"values": _sim().engine.history.values(), "y_min": 0, "y_max": 100}

@app.get("/api/particles")
async def get_particles():
    return {"particles": _sim().animator.snapshot()}

@app.get("/api/analysis")
async def get_analysis():
    sim = _sim()
    return system_report(sim.store.snapshot, sim.engine.derived, sim.cfg)

@app.get("/api/surface")
async def get_surface():
    s: Surface = app.state.surface
    return {
        "width": s.width,
        "height": s.height,
        "format": "rgb8",
        "data": base64.b64encode(s.to_bytes()).decode("ascii"),
    }


@app.websocket("/ws")
async def ws_endpoint(ws: WebSocket):
    await ws.accept()
    log.info("[WS] client connected")
    loop = asyncio.get_running_loop()
    try:
        while True:
            # 10Hz: push the latest shared state, then hold until the tick ends
            await ws.send_json(_sim().frame())
            end_at = loop.time() + FRAME_S
            # client messages are drained and ignored, only close ends the tick early
            while True:
                timeout = end_at - loop.time()
                if timeout <= 0:
                    break
                try:
                    msg = await asyncio.wait_for(ws.receive(), timeout=timeout)
                except asyncio.TimeoutError:
                    break
                if msg["type"] == "websocket.disconnect":
                    return
    except (WebSocketDisconnect, RuntimeError, OSError):
        # client went away mid-send
        pass
    finally:
        log.info("[WS] client gone")
