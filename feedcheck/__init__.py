"""feedcheck — ordering acceptance check for live paginated feeds.

Collects the first N items of a listing (Hacker News /newest by default),
turns each "5 minutes ago" label into minutes, and checks that the sample
runs newest to oldest. Each run produces a Verdict and a saved RunResult.

Usage:
    python -m feedcheck list                              # Show feeds
    python -m feedcheck run hacker_news                   # Default engine
    python -m feedcheck run hacker_news --engine firefox  # Pick an engine
    python -m feedcheck run hacker_news --all             # All browsers
    python -m feedcheck show hacker_news                  # Latest verdicts
"""
