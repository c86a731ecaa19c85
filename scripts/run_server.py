"""Start the BSA Discovery Questionnaire web server."""

import sys
import os

# Project root on sys.path so the package imports without installation
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import uvicorn
from dotenv import load_dotenv

load_dotenv()

if __name__ == "__main__":
    uvicorn.run(
        "bsa_discovery.web.server:app",
        host=os.getenv("BSA_HOST", "0.0.0.0"),
        port=int(os.getenv("BSA_PORT", "8000")),
        reload="--reload" in sys.argv,
    )
