from dailygames.models.dc_models import (
    GatesStartResponseModel,
    InventionModel,
    InvestStartResponseModel,
    VisibleProfileModel,
)
from dailygames.models.schema_models import CharacterProfileSchema, InvestSlateSchema


class DataConverter:
    """This class converts cached records into the bodies sent to the client.

    Hidden truths never leave the server: only the visible parts are copied.
    """

    def convert_slate_to_start_response(self, slate: InvestSlateSchema, date_key: str) -> InvestStartResponseModel:
        """Convert the InvestSlateSchema to the InvestStartResponseModel to send client

        Args:
            slate (InvestSlateSchema): Cached slate, including hidden truths
            date_key (str): Date key echoed back to the client

        Returns:
            InvestStartResponseModel: Public view of the slate
        """
        return InvestStartResponseModel(
            mode=slate.mode.value,
            date_key=date_key,
            game_id=slate.game_id,
            inventions=[
                InventionModel.model_validate(invention.model_dump())
                for invention in slate.inventions
            ],
        )

    def convert_profile_to_start_response(self, profile: CharacterProfileSchema, date_key: str) -> GatesStartResponseModel:
        """Convert the CharacterProfileSchema to the GatesStartResponseModel to send client

        Args:
            profile (CharacterProfileSchema): Cached profile, including alignment and hidden life
            date_key (str): Date key echoed back to the client

        Returns:
            GatesStartResponseModel: Visible card and face emoji only
        """
        return GatesStartResponseModel(
            mode=profile.mode.value,
            date_key=date_key,
            game_id=profile.game_id,
            visible=VisibleProfileModel.model_validate(profile.visible.model_dump()),
            face_emoji=profile.face_emoji,
        )
