"""Order service shell around the settlement engine.

Configuration, asset loading, the create/settle pipeline and storage
adapters. Business rules live in the settlement package.
"""
