import argparse, asyncio, logging
import uvicorn, uvloop

from .analysis import system_report
from .config import CFG
from .simulation import Simulation
from .surface import Surface

log = logging.getLogger("dashsim")

async def headless(seconds: float):
    sim = Simulation(surface=Surface(CFG.surface_w, CFG.surface_h))
    sim.start()
    try:
        seen = 0
        loop = asyncio.get_running_loop()
        end_at = loop.time() + seconds
        while loop.time() < end_at:
            await asyncio.sleep(min(CFG.tick_s, max(end_at - loop.time(), 0)))
            if sim.engine.ticks != seen:
                seen = sim.engine.ticks
                r = system_report(sim.store.snapshot, sim.engine.derived)
                f = sim.frame()
                log.info("[SIM] tick=%d sample=%.1f load=%.1f%% legit=%.1f%% mal=%.1f%% prot=%d%% %s",
                         seen, f["history"][-1], f["server_load_percent"],
                         f["legitimate_traffic_percent"], f["malicious_traffic_percent"],
                         r["protection_score"], r["status"])
    finally:
        sim.stop()

def main(argv=None):
    ap = argparse.ArgumentParser(prog="dashsim", description="network security dashboard simulator")
    ap.add_argument("--host", default=CFG.host_http)
    ap.add_argument("--port", type=int, default=CFG.port_http)
    ap.add_argument("--headless", action="store_true", help="run the simulation without the web server")
    ap.add_argument("--seconds", type=float, default=10.0)
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    if args.headless:
        uvloop.install()
        asyncio.run(headless(args.seconds))
    else:
        uvicorn.run("dashsim.ws_server:app", host=args.host, port=args.port, loop="uvloop")

if __name__ == "__main__":
    main()
