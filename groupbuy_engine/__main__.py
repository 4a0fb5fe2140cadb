"""Allow running as: python -m groupbuy_engine"""

from groupbuy_engine.main import run, serve
import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        serve()
    else:
        file_arg = sys.argv[1] if len(sys.argv) > 1 else ""
        run(file_arg)
