"""
LLM Chess Arena package.

Components:
- tick_orchestrator: one tournament tick (advance every active contest, then matchmake)
- game/termination: per-contest ply advancement, forfeits and rating settlement
- matchmaker: pairs idle participants into new contests
- elo: rating math
- referee/move_validator: python-chess rules on FEN positions
- llm_oracle/random_oracle: move oracles (LLM over the AI gateway, or random for dry runs)
- store/sql_store/memory_store: persistence contract and implementations
- tournament/server/cli: control surface, HTTP trigger and command line
"""
# Package exports are intentionally minimal; import modules directly as needed.
