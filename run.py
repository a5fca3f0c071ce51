"""Start the ReFit Streamlit server locally and point a browser at it."""

import logging
import sys
import threading
import time
import webbrowser
from pathlib import Path

import requests


PORT = 8501
URL = f"http://localhost:{PORT}"


def _wait_and_open_browser() -> None:
    """Poll the local server and open a browser tab on the first 200."""
    for _ in range(30):
        try:
            resp = requests.get(URL, timeout=2)
            if resp.status_code == 200:
                webbrowser.open(URL)
                return
        except requests.RequestException:
            pass
        time.sleep(1)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Allow running from a checkout without installing the package
    src_dir = Path(__file__).resolve().parent / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))

    from streamlit.web import bootstrap

    app_path = str(src_dir / "ReFit" / "app.py")

    # bootstrap.run blocks, so the browser opener runs beside it
    threading.Thread(target=_wait_and_open_browser, daemon=True).start()

    bootstrap.run(
        app_path,
        is_hello=False,
        args=[],
        flag_options={
            "server.headless": True,
            "server.port": PORT,
            "browser.gatherUsageStats": False,
        },
    )


if __name__ == "__main__":
    main()
