"""termsuggest - completion candidates for partially typed command lines.

Walks a tokenized command line against declarative command specifications,
runs their suggestion generators and aggregates a ranked, deduplicated list
of candidates, plus hints telling the host whether filesystem paths should
be offered too. Requests are served by an asyncio-based engine.
"""
