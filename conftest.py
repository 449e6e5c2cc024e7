# Puts the checkout root on sys.path so `poclidex` imports without installing
import sys, pathlib
root = pathlib.Path(__file__).resolve().parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))
