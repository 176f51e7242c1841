import uvicorn
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

if __name__ == "__main__":
    log_level = os.getenv("LOG_LEVEL", "info").lower()
    reload = os.getenv("RELOAD", "false").lower() == "true"
    port = int(os.getenv("PORT", "8000"))

    uvicorn.run(
        "aliexpress_offers.main:app",
        host="0.0.0.0",
        port=port,
        reload=reload,
        log_level=log_level,
        access_log=True
    )
