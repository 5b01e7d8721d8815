import sys
from pathlib import Path

# Add src/ to sys.path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))
