from .cli import main

# No error handling here. All catch-all handling lives in cli.main() so that
# both `python -m cheatsheet` and the installed `cheatsheet` script go through
# the same code path.
if __name__ == "__main__":
    main()
