"""
Allow running MESHWALLET as a module: python -m meshwallet
"""

from meshwallet.repl import main_sync

if __name__ == "__main__":
    main_sync()
