# launch.py: starts the AikiNote Streamlit app, also from a PyInstaller bundle
import sys, os
from streamlit.web.cli import main as st_main

def resource_path(rel_path: str) -> str:
    base = getattr(sys, "_MEIPASS", os.path.abspath("."))
    return os.path.join(base, rel_path)

if __name__ == "__main__":
    os.chdir(getattr(sys, "_MEIPASS", os.path.abspath(".")))

    app_path = resource_path(os.path.join("aikinote", "app.py"))
    sys.argv = ["streamlit", "run", app_path, "--server.headless=true"]
    raise SystemExit(st_main())
