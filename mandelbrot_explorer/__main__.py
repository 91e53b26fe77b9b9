"""
Allow running the package directly: python -m mandelbrot_explorer
"""

if __name__ == "__main__":
    from .app import run
    run()
