"""Phase orchestration scripts for the suburb listing build.

 - build_listing.py: load DataPack tables, join, write the listing YAML
 - run_pipeline.py: fetch + build in one run
"""
