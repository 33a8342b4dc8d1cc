"""
LLM Word Chain (끝말잇기) package.

Components:
- engine: turn transitions over GameState (local guards + verdict resolution)
- judge/prompting: remote judge prompts, response schema and verdict parsing
- session/server: in-memory browser sessions and the Flask JSON API
- llm_client: minimal Vercel AI Gateway transport (OpenAI-compatible wire format; base_url configurable)
"""
# Package exports are intentionally minimal; import modules directly as needed.
