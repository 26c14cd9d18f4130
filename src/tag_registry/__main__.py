"""Run the tag registry service."""

from tag_registry.api.registry.__main__ import main

if __name__ == "__main__":
    main()
