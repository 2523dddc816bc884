"""Upload orchestration.

Manages the end-to-end upload run:
1. Select datasets → one task per dataset
2. Per dataset: pad → upload page blob → parse header → derive → commit metadata
3. Fan-in → collect every success and failure into an UploadReport
"""
