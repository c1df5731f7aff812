"""Example validators for SomeModel and its parts."""

from flexvalidator import Assume, DirectValidator, EngineConfig, RuleInfo, SectionedValidator, section

from .models import DoubleModel, DoubleModelType, SomeModel, SubModel, SubModelType


class DoubleLeftRightValidator(SectionedValidator):
    """Rules for a left/right pair; the caller picks the section from the types."""

    IN_IN_SECTION = "type.inin"
    IN_OUT_SECTION = "type.inout"

    SAME_NAME = RuleInfo(
        "e229be44-ec96-436a-916c-dbbfabe7a7f3",
        "When In is selected for both Left and Right, Left and Right should have the same name",
        "doubleleftright",
    )
    LEFT_NULL = RuleInfo("66a73e51-1c21-4ef7-958c-ae45acfd9f45", "When In-Out, Left must be null")
    RIGHT_NAMED = RuleInfo("670ac060-d954-4518-8d03-155130391b92", "When In-Out, Right must have a name")

    @section(IN_IN_SECTION)
    def validate_in_in(self, ctx, left: DoubleModel, right: DoubleModel) -> None:
        ctx.start(self.SAME_NAME)
        if left.name != right.name:
            ctx.fail()
        ctx.complete(Assume.PASS)

    @section(IN_OUT_SECTION)
    def validate_in_out(self, ctx, left: DoubleModel, right: DoubleModel) -> None:
        ctx.start(self.LEFT_NULL)
        if left.name is not None:
            ctx.fail()
        ctx.complete(Assume.PASS)

        ctx.start(self.RIGHT_NAMED)
        if not right.name:
            ctx.fail()
        ctx.complete(Assume.PASS)


class SubModelValidator(DirectValidator):
    """Small model, no sections."""

    ID_POSITIVE = RuleInfo("0b8f6c1e-5a3d-4f7e-9c21-7d4e8a6b3f10", "Sub id must be greater than zero")
    NAME_REQUIRED = RuleInfo("9d2a7e45-1c6b-4e83-a0f9-3b5c8d1e2f74", "Sub name is required when its type is Allowed")
    TYPE_ALLOWED = RuleInfo("5e71c3a9-8b2d-4f06-b4e1-c9a0d6f2873b", "Sub type must not be Disallowed")

    def rules(self, ctx, sub: SubModel) -> None:
        ctx.start(self.ID_POSITIVE)
        if sub.id <= 0:
            ctx.fail()
        ctx.complete(Assume.PASS)

        ctx.start(self.NAME_REQUIRED)
        if sub.type == SubModelType.ALLOWED and not sub.name:
            ctx.fail()
        ctx.complete(Assume.PASS)

        ctx.start(self.TYPE_ALLOWED)
        if sub.type == SubModelType.DISALLOWED:
            ctx.fail()
        ctx.complete(Assume.PASS)


class SomeModelValidator(DirectValidator):
    """Validates SomeModel, delegating to the sub-model and left/right validators."""

    ID_NOT_NEGATIVE = RuleInfo("c4f1a8d2-6e3b-47a9-8d5c-1f0e9b2a7c63", "Id must not be negative")
    NAME_REQUIRED = RuleInfo("7a9e2b14-d05c-4c38-9f61-e8b3a4d7c215", "Name is required")
    NAME_LENGTH = RuleInfo("2f6d9c83-4b1e-4a07-b5d2-9e8c7f1a3b46", "Name must be at most 50 characters")
    SUB_VALID = RuleInfo("b13e5f07-9a2c-4d86-8e4b-6c1d0a9f5e28", "Sub model must be valid")
    DOUBLE_COMBINATION = RuleInfo(
        "e8c2d4b6-3f1a-4e95-a7d0-5b9c6e2f1a84",
        "Left and Right types must be In-In or In-Out",
    )

    MAX_NAME_LENGTH = 50

    def __init__(self, config: EngineConfig | None = None):
        super().__init__(config=config)
        self.sub_validator = SubModelValidator(config=config)
        self.double_validator = DoubleLeftRightValidator(config=config)

    def rules(self, ctx, model: SomeModel) -> None:
        ctx.start(self.ID_NOT_NEGATIVE)
        if model.id < 0:
            ctx.fail()
        ctx.complete(Assume.PASS)

        ctx.start(self.NAME_REQUIRED)
        if not model.name:
            ctx.fail()
        ctx.complete(Assume.PASS)

        # Length is meaningless without a name
        if ctx.passed(self.NAME_REQUIRED.guid):
            ctx.start(self.NAME_LENGTH)
            if len(model.name) > self.MAX_NAME_LENGTH:
                ctx.fail()
            ctx.complete(Assume.PASS)

        ctx.start(self.SUB_VALID)
        if not ctx.include(self.sub_validator, model.sub).is_valid:
            ctx.fail()
        ctx.complete(Assume.PASS)

        left, right = model.double_left, model.double_right
        ctx.start(self.DOUBLE_COMBINATION)
        if (left.type, right.type) == (DoubleModelType.IN, DoubleModelType.IN):
            selected = DoubleLeftRightValidator.IN_IN_SECTION
        elif (left.type, right.type) == (DoubleModelType.IN, DoubleModelType.OUT):
            selected = DoubleLeftRightValidator.IN_OUT_SECTION
        else:
            selected = None
            ctx.fail()
        ctx.complete(Assume.PASS)

        if selected is None:
            return
        ctx.include_section(self.double_validator, selected, left, right)
