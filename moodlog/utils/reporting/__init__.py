# moodlog/utils/reporting/__init__.py
"""
Analytics over a record snapshot: correlations, aggregates, heatmaps and insights.
"""
