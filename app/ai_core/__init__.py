# AI Core module

"""
AI Core Module - everything that talks to the language model.

Key responsibilities:
- Text generation through the gen_ai_hub langchain proxy
- Thread summarization
- Retrieval-augmented search over archived summaries
- General /chat assistant
"""
