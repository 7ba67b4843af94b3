import logging

from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status
from fastapi.responses import PlainTextResponse

from dodgeball.errors import CodecError, ParseError, TransportError
from dodgeball.services.simulation import simulate_document

simulate_router = APIRouter()


class SimulateAPI:
    @staticmethod
    @simulate_router.post("/simulate", response_class=PlainTextResponse)
    async def simulate(
        request: Request,
        input: UploadFile | None = File(None),
        first_only: bool = False,
    ):
        """Simulate every case of the uploaded document

        Args:
            request (Request): Used to reach the client and settings stored on the app
            input (UploadFile): Text or JSON document, multipart field "input"
            first_only (bool, optional): Only simulate the first case. Defaults to False.

        Returns:
            PlainTextResponse: One "<throws> <last player>" line per case
        """
        if input is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No input file uploaded",
            )

        text = await input.read()
        client = request.app.state.client
        settings = request.app.state.settings
        try:
            out = await simulate_document(
                client, text, first_only=first_only, concurrent=settings.concurrent
            )
        except ParseError as e:
            logging.info(f"Rejected input {input.filename}: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except TransportError as e:
            logging.error(f"Simulation service call failed: {e}")
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
        except CodecError as e:
            logging.error(f"Invalid simulation service response: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
            )
        return PlainTextResponse(out)
