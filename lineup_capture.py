#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# archivo principal (mínimo)

import argparse

from lineup.config import load_settings
from lineup.lineup_config import read_config
from lineup.capture.jobs import PHASES
from lineup.run import capture_all

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Capturas por viewport de las urls del lineup.json")
    parser.add_argument("--step", choices=PHASES, default="before")
    args = parser.parse_args()
    try:
        settings = load_settings()
        config = read_config(settings.LINEUP_WORKING_DIR, settings.LINEUP_CONFIG)
        capture_all(settings, config, args.step)
    except KeyboardInterrupt:
        pass
