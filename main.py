# main.py
"""
CogAdapt – Cognitive-State Inference & Adaptive-Presentation Engine
Entry point for local demonstration.

Launches up to two processes:
1. FastAPI service (on port 8000)
2. Demo client that feeds synthetic signal batches to the service and prints
   the inferred state, forecast and active adaptations (--demo)

Use Ctrl+C to terminate.
"""

import argparse
import logging
import multiprocessing
import time

import requests

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Configuration
# ----------------------------------------------------------------------

class Config:
    """Configuration settings for CogAdapt."""

    # Server settings
    SERVER_HOST = "127.0.0.1"
    SERVER_PORT = 8000

    # Monitor settings
    WINDOW_MINUTES = 30          # Lookback window per evaluation
    MIN_SAMPLES = 5              # Below this the state stays neutral
    EVALUATION_INTERVAL = 5      # Seconds between demo evaluations
    BATCH_SIZE = 20              # Synthetic samples generated per cycle

    # Adaptation
    ADAPTATION_MODE = "subtle"

    # Demo
    DEMO_MODE = False
    DEMO_PROFILE = "focused"

    @classmethod
    def server_url(cls) -> str:
        return f"http://{cls.SERVER_HOST}:{cls.SERVER_PORT}"


# ----------------------------------------------------------------------
# 1. FastAPI Server Process
# ----------------------------------------------------------------------

def run_server(host: str, port: int):
    """Start Uvicorn server for the FastAPI application."""
    import uvicorn
    from server.api import app

    logger.info(f"[Server] Starting on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")


# ----------------------------------------------------------------------
# 2. Demo Client Process
# ----------------------------------------------------------------------

def _wait_for_server(server_url: str, attempts: int = 10) -> bool:
    for _ in range(attempts):
        try:
            resp = requests.get(f"{server_url}/health", timeout=1)
            if resp.status_code == 200:
                return True
        except requests.exceptions.ConnectionError:
            pass
        time.sleep(1)
    return False


def run_demo_client(
    server_url: str,
    profile: str,
    mode: str,
    interval: float,
    batch_size: int,
    window_minutes: float,
    min_samples: int,
):
    """
    Feed synthetic samples through the service in a loop.

    The client keeps its own CognitiveMonitor to own the sliding window
    locally and posts the windowed samples to /evaluate on every cycle.
    """
    from cognition.cognitive_monitor import CognitiveMonitor
    from cognition.signal_source import SyntheticSignalSource

    source = SyntheticSignalSource(profile=profile)
    monitor = CognitiveMonitor(window_minutes=window_minutes, min_samples=min_samples, adaptation_mode=mode)

    logger.info(f"[Client] Demo profile: {profile}, adaptation mode: {mode}")
    if not _wait_for_server(server_url):
        logger.warning("[Client] Server not responding - will retry on each cycle")

    evaluations = 0
    try:
        while True:
            monitor.add_samples(source.generate(batch_size))
            monitor.refresh()
            window = monitor.window_samples()

            payload = {
                "samples": [s.model_dump(mode="json") for s in window],
                "adaptation_mode": mode,
            }
            try:
                resp = requests.post(f"{server_url}/evaluate", json=payload, timeout=2.0)
                if resp.status_code == 200:
                    evaluations += 1
                    body = resp.json()
                    result = body["result"]
                    line = (
                        f"[Client] State: {result['state']} "
                        f"(conf={result['confidence']:.2f}) | "
                        f"focus={result['focus_level']:.2f} "
                        f"stress={result['stress_index']:.2f} "
                        f"budget={result['cognitive_budget']:.2f}"
                    )
                    prediction = result.get("prediction")
                    if prediction:
                        line += (
                            f" | next: {prediction['next_state']} "
                            f"in ~{prediction['time_to_onset_minutes']:.0f} min"
                        )
                    print(line)
                    print(f"         {body['explanation']}")
                else:
                    logger.warning(f"[Client] Server error: {resp.status_code} {resp.text}")
            except requests.exceptions.ConnectionError:
                logger.warning("[Client] Cannot connect to server - retrying...")

            time.sleep(interval)

    except KeyboardInterrupt:
        logger.info("[Client] Received shutdown signal")
    finally:
        logger.info(f"[Client] Evaluations completed: {evaluations}")


# ----------------------------------------------------------------------
# 3. Main Orchestrator
# ----------------------------------------------------------------------

def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="CogAdapt cognitive-state engine")
    parser.add_argument("--demo", action="store_true",
                        help="Also run a demo client with synthetic signals")
    parser.add_argument("--profile", default=Config.DEMO_PROFILE,
                        choices=["focused", "distracted", "stressed", "idle"],
                        help="Synthetic user profile for the demo client")
    parser.add_argument("--mode", default=Config.ADAPTATION_MODE,
                        choices=["invisible", "subtle", "visible"],
                        help="Adaptation mode (default: subtle)")
    parser.add_argument("--interval", type=float, default=Config.EVALUATION_INTERVAL,
                        help="Seconds between demo evaluations (default: 5)")
    parser.add_argument("--port", type=int, default=Config.SERVER_PORT,
                        help="API server port (default: 8000)")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_arguments()

    Config.DEMO_MODE = args.demo
    Config.DEMO_PROFILE = args.profile
    Config.ADAPTATION_MODE = args.mode
    Config.EVALUATION_INTERVAL = args.interval
    Config.SERVER_PORT = args.port

    print("\n" + "=" * 70)
    print("CogAdapt - Cognitive-State Inference & Adaptive Presentation")
    print("=" * 70)
    print(f"Server: {Config.server_url()}")
    if Config.DEMO_MODE:
        print(f"Demo profile: {Config.DEMO_PROFILE} | Mode: {Config.ADAPTATION_MODE} "
              f"| Interval: {Config.EVALUATION_INTERVAL}s")
    print("=" * 70 + "\n")

    try:
        multiprocessing.set_start_method("spawn", force=True)
    except RuntimeError:
        pass

    server_process = multiprocessing.Process(
        target=run_server,
        args=(Config.SERVER_HOST, Config.SERVER_PORT),
        name="Server",
    )
    client_process = None
    if Config.DEMO_MODE:
        client_process = multiprocessing.Process(
            target=run_demo_client,
            kwargs={
                "server_url": Config.server_url(),
                "profile": Config.DEMO_PROFILE,
                "mode": Config.ADAPTATION_MODE,
                "interval": Config.EVALUATION_INTERVAL,
                "batch_size": Config.BATCH_SIZE,
                "window_minutes": Config.WINDOW_MINUTES,
                "min_samples": Config.MIN_SAMPLES,
            },
            name="Client",
        )

    server_process.start()
    if client_process:
        time.sleep(2)  # Give server time to start
        client_process.start()

    print("[Main] Press Ctrl+C to stop all components\n")

    try:
        server_process.join()
        if client_process:
            client_process.join()
    except KeyboardInterrupt:
        print("\n[Main] Shutdown signal received")
        for proc in [server_process, client_process]:
            if proc and proc.is_alive():
                print(f"[Main] Terminating {proc.name}...")
                proc.terminate()
                proc.join(timeout=3.0)
        print("[Main] Shutdown complete")
