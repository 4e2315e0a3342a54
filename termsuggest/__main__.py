"""Allow `python -m termsuggest`."""

from .command import main

main()
