"""Data ingestion scripts for the suburb listing build.

- 01_fetch_datapack.py: ABS 2021 Census GCP DataPack (download + extract)
"""
