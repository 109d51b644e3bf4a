"""
publishing/ — Todo lo que toca el repo y el remote.

- origin.py          → Lee la URL del remote origin de .git/config
- asset_rewriter.py  → Antepone "<repo>/" a los assets del index.html
- branch_publisher.py → init + commit + force push de dist/ a una rama
"""
