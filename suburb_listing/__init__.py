"""Build the suburb card listing for the census lesson page.

Pipeline: fetch DataPack -> load G01/G02/G62 + geography -> reduce commute
modes -> join and keep the most populous suburbs -> write YAML.
"""

__version__ = "0.1.0"
