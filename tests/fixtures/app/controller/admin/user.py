"""User administration."""


class UserController:
    """
    @controller
    """

    def __init__(self, service):
        self.service = service

    def index(self, request):
        """
        @summary List users
        @router get /api/users
        @response 200 array<User>
        """

    def update(self, request, id):
        """
        @summary Update a user
        @router put /api/users/{id}
        @request path integer id
        @request body User
        @deprecated
        """
