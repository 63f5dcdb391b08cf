"""
machet — interactive assistant loop that executes tools embedded in model output.

The model answers in free text; fenced blocks such as

    ```save hello.py
    print("hi")
    ```

are parsed out, matched to registered tools and executed. A tool that
surfaces output feeds it straight back to the model as the next turn.

Quick start:
    machet --model ollama/qwen2.5-coder
    machet-server            # HTTP sessions, see machet.server
"""

__version__ = "0.1.0"
