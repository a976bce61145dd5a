"""Allow ``python -m docbundler``."""

from docbundler.pipeline import main

main()
