"""Forms for the tournament blueprint."""

from flask_wtf import FlaskForm
from wtforms import Field, IntegerField, SelectField, StringField
from wtforms.validators import DataRequired, Length, NumberRange, Optional

from tourneyhub.core.constants import DEFAULT_FORMAT, DEFAULT_GAME_TYPE


class TeamListField(Field):
    """Seed team names, given as a list or one comma separated string."""

    def _value(self):
        return ", ".join(self.data or [])

    def process_formdata(self, valuelist):
        names = []
        for value in valuelist:
            if isinstance(value, str):
                names.extend(part.strip() for part in value.split(","))
        self.data = [name for name in names if name]


class TournamentForm(FlaskForm):
    """Form for creating a tournament."""

    name = StringField("Tournament Name", validators=[DataRequired(), Length(max=80)])

    gameType = StringField("Game Type", validators=[Optional()], default=DEFAULT_GAME_TYPE)

    format = SelectField(
        "Tournament Format",
        choices=[
            ("knockout", "Knockout"),
            ("round_robin", "Round Robin"),
            ("league_knockout", "League + Knockout"),
        ],
        default=DEFAULT_FORMAT,
    )

    # Absolute timestamps in milliseconds
    joinDeadline = IntegerField("Join Deadline", validators=[Optional(), NumberRange(min=0)])
    startAt = IntegerField("Start Time", validators=[Optional(), NumberRange(min=0)])

    # Out-of-range values are clamped rather than rejected
    matchDurationMinutes = IntegerField("Match Duration (minutes)", validators=[Optional()])
    breakMinutes = IntegerField("Break Between Matches (minutes)", validators=[Optional()])
    maxParticipants = IntegerField("Max Participants", validators=[Optional()])

    seedTeams = TeamListField("Seed Teams", validators=[Optional()])
