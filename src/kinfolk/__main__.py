from __future__ import annotations

from signal import SIGINT, signal

from kinfolk.ui.cli import main, sigint_handler

signal(SIGINT, sigint_handler)
main()
