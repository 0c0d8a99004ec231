"""
podcastgen Pipeline Stages

Fixed order:
    rms          — RMS Extractor
    features     — Feature Aggregator
    classify     — Classifier
    smoothing    — Smoother
    merge        — Segment Merger
"""
