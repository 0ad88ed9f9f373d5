"""Account demo entrypoint.

Run with:
  python -m acct
"""

import logging
import os
import uvicorn

def main() -> None:
    logging.basicConfig(
        level=os.getenv("ACCT_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("ACCT_HOST", "127.0.0.1")
    port = int(os.getenv("ACCT_PORT", "8000"))
    reload = os.getenv("ACCT_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("acct.app:app", host=host, port=port, reload=reload)

if __name__ == "__main__":
    main()
