#!/usr/bin/env python3
"""
WikiOCR - Main Entry Point
Runs the command line interface when arguments are given, the GUI otherwise.
"""

import sys


def main():
    """Main entry point for the OCR application"""
    try:
        if len(sys.argv) > 1:
            # CLI mode
            from wikiocr.cli_app import cli
            cli()
        else:
            # GUI mode
            try:
                from wikiocr.gui_app import main as gui_main
            except ImportError as e:
                print(f"GUI mode not available: {e}")
                print("Tkinter is required for GUI mode.")
                print("Falling back to CLI mode. Use --help for usage.")
                from wikiocr.cli_app import cli
                cli()
            else:
                gui_main()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except Exception as e:
        print(f"Critical error starting WikiOCR: {e}")
        print("This may be due to missing dependencies or an invalid config.ini.")
        sys.exit(1)


if __name__ == "__main__":
    main()
