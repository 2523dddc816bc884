"""Pipeline activities.

Each activity performs a single step of one dataset's upload:
- pad_payload: Grow the payload to a whole number of 512-byte pages
- upload_payload: Upload the payload as a page blob
- parse_header: Parse the ENVI text header into a HeaderRecord
- derive_metadata: Derive blob metadata from the header and sidecar
- write_metadata: Commit the metadata to the page blob
"""
