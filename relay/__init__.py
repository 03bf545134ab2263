"""OneBot to DeepSeek chat relay.

This package connects a OneBot v11 websocket endpoint (group chat protocol)
to an OpenAI-compatible chat-completions backend. The relay handles:

- One persistent websocket with echo-correlated outbound actions
- Per-user, per-group and global fixed-window rate limits
- Strict per-channel ordering of replies
- Bounded conversation memory with rolling summaries and personas
- Prefix commands for users and admins

Architecture Overview:
    - server.py: FastAPI application (lifespan, /healthz, /status)
    - runtime.py: Component wiring and start/stop sequence
    - config/: Configuration modules (environment-based)
    - transport/: OneBot websocket client, frame parsing, pending actions
    - admission/: Rate limiter and channel lock
    - conversation/: Conversation engine and prompt composition
    - llm/: DeepSeek chat-completions client
    - storage/: JSON state store, SQLite sessions and message archive
    - bot/: Message orchestrator and commands

Example:
    Start the server with uvicorn:

    $ uvicorn relay.server:app --host 0.0.0.0 --port 5140

Environment Variables:
    Required:
        - DEEPSEEK_API_KEY: Bearer token of the chat backend

    Optional:
        - ONEBOT_WS_URL: OneBot websocket endpoint (default: ws://napcat:3001)
        - ONEBOT_ACCESS_TOKEN: Bearer token for the websocket handshake
        - BOT_SELF_ID: Own account id (default: taken from each event)
        - ADMIN_IDS: Comma-separated admin user ids
        - DATA_DIR: Directory for state.json and the SQLite database
"""
