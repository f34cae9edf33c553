"""Floorplan documents: upload, listing and download."""
import base64
import os
import logging

from shared.schemas import PDF_SIGNATURE
from shared.validation import ValidationError


class FloorplanService:
    """Service for floorplan metadata and their PDF bodies.

    The PDF is an opaque blob here; it is checked for the PDF signature and
    a size limit before upload and handed back as bytes on download.
    """

    def __init__(self, api, max_pdf_size_mb=25):
        self.api = api
        self.max_pdf_size = max_pdf_size_mb * 1024 * 1024
        self.logger = logging.getLogger(self.__class__.__name__)

    def list_for_project(self, project_id):
        """Floorplans of a project, without their documents."""
        return self.api.call('GET', f'/api/projects/{project_id}/floorplans') or []

    def get(self, floorplan_id):
        return self.api.call('GET', f'/api/floorplans/{floorplan_id}')

    def upload(self, project_id, name, document, page_count=1):
        """Upload a floorplan from PDF bytes or a file path.

        Raises:
            ValidationError: the document is not a PDF or is too large; nothing was sent.
            TransportError: the API rejected the upload.
        """
        if isinstance(document, (str, os.PathLike)):
            with open(document, 'rb') as f:
                document = f.read()

        if not document.startswith(PDF_SIGNATURE):
            raise ValidationError("Floorplan document is not a PDF")
        if len(document) > self.max_pdf_size:
            raise ValidationError(f"Floorplan document is {len(document)} bytes, "
                                  f"limit is {self.max_pdf_size} bytes")

        body = {
            'project_id': project_id,
            'name': name,
            'pdf_data': base64.b64encode(document).decode('ascii'),
            'page_count': page_count,
        }
        record = self.api.call('POST', '/api/floorplans', json=body)
        self.logger.info(f"Uploaded floorplan {record['id']} '{name}' ({len(document)} bytes, {page_count} pages)")
        return record

    def fetch_document(self, floorplan_id, raw=True) -> bytes:
        """Return the PDF bytes of a floorplan.

        With ``raw`` the binary endpoint is used; otherwise the base64 body of
        the detail record is decoded.
        """
        if raw:
            return self.api.download(f'/api/floorplans/{floorplan_id}/pdf')
        record = self.get(floorplan_id)
        return base64.b64decode(record['pdf_data'])

    def delete(self, floorplan_id):
        self.api.call('DELETE', f'/api/floorplans/{floorplan_id}')
        self.logger.info(f"Deleted floorplan {floorplan_id}")
