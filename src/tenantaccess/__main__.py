"""Entry point for 'python -m tenantaccess' command."""

from tenantaccess.cli import main

if __name__ == "__main__":
    main()
