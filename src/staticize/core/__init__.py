"""
Core Package.

Contains the language-independent rewrite logic:
- Immutable tree model and visitor
- Recipes and the recipe pipeline
- Source-to-source engine
"""
