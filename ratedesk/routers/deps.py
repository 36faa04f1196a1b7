from fastapi import Request

from ratedesk.services.desk import RateDesk


def get_desk(request: Request) -> RateDesk:
    return request.app.state.desk
