"""Run the proxy with python -m cerberus."""

from cerberus.main import main

if __name__ == "__main__":
    main()
