"""
View helpers shared by all API apps.
"""
from rest_framework import status
from rest_framework.response import Response


class EnvelopeMixin:
    """
    Wrap successful DRF responses into ``{data, error: null}``.

    Generic views keep their normal list/create/update/destroy code paths;
    the payload is enveloped and 201/204 are reported as 200. Responses that
    are already envelopes (errors, service results) pass through untouched.
    """

    def finalize_response(self, request, response, *args, **kwargs):
        if isinstance(response, Response) and not getattr(response, 'is_envelope', False):
            if status.is_success(response.status_code):
                data = response.data
                if response.status_code == status.HTTP_204_NO_CONTENT:
                    data = {'success': True}
                response.data = {'data': data, 'error': None}
                response.status_code = status.HTTP_200_OK
                response.is_envelope = True
        return super().finalize_response(request, response, *args, **kwargs)
