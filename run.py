"""
RUN SCRIPT - Start the transformation chatbot backend
=====================================================

USAGE:
  python run.py

  Serves POST /complete on the configured port (PORT, default 3002).
  API docs: http://localhost:3002/docs

NOTE:
  GROQ_API_KEY must be set (environment or .env); the server refuses to start
  without it.
"""

from transformbot.main import run

# ------------------------------------------------------------------------------
# ENTRY POINT
# ------------------------------------------------------------------------------
if __name__ == "__main__":
    run()
