"""
Run the CDS service with uvicorn.

    python -m tnbc_cds
"""
import uvicorn

from tnbc_cds.config import CDS_HOST, CDS_PORT, LOG_FILE, LOG_LEVEL
from tnbc_cds.utils.logging import setup_logging


def main() -> None:
    setup_logging(LOG_LEVEL, LOG_FILE or None)
    uvicorn.run("tnbc_cds.main:app", host=CDS_HOST, port=CDS_PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
