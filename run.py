"""Run the tunnel bootstrapper."""

from tunnelkeeper.__main__ import main

if __name__ == "__main__":
    main()
