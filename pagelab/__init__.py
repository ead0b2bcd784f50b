"""
PageLab - Interactive HTML, CSS and JavaScript exercise platform.

Packages:
- schemas: exercise catalog and progress models
- classroom: catalog loading, verification, progress and session state
- sandbox: live preview rendering and learner code execution
- viewer: HTML rendering helpers for the Streamlit app
"""

__version__ = "0.1.0"
