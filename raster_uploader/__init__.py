"""ENVI Raster Page Blob Uploader.

Publishes ENVI-style raster datasets (``.bin`` payload, ``.hdr`` header,
optional ``.bin.aux.xml`` sidecar) into an Azure page blob container and
annotates each blob with geospatial metadata derived from the header.
"""

__version__ = "0.1.0"
