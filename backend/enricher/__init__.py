"""
Fixture Enricher.
Matches known fixtures against a paginated results site, pulls kick-off times and
goal events from per-match pages, and appends one CSV row per fixture so a stopped
run can resume where it left off.
"""
