from econnect.scraper.run import _cli_entrypoint

if __name__ == "__main__":
    # Configuration comes from ECONNECT_* environment variables; flags override.
    raise SystemExit(_cli_entrypoint())
