"""Development entry point for running the MerchLens service."""

import os
import sys
from merchlens.app import create_app
from dotenv import load_dotenv

if getattr(sys, "frozen", False):
    load_dotenv(os.path.join(sys._MEIPASS, ".env"))
else:
    load_dotenv()

app = create_app()

if __name__ == "__main__":
    host = os.getenv("MERCHLENS_HOST", "127.0.0.1")
    port = int(os.getenv("MERCHLENS_PORT", "5000"))
    app.run(host=host, port=port)
