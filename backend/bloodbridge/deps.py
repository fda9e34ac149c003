from fastapi import Request

# Built once in the app lifespan; tests swap them via dependency_overrides

def get_repo(request: Request):
    return request.app.state.repo

def get_verifier(request: Request):
    return request.app.state.verifier

def get_gateway(request: Request):
    return request.app.state.gateway
