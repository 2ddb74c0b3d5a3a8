"""
Tag implementations for minimessage

Each tag is registered as a TagSpec whose factory turns the tag name and
its arguments into a Tag. Factories raise ParsingError (through
Context.new_error) when the arguments are unusable; the parser then keeps
the tag as literal text.
"""

import re
import uuid
from typing import Dict, List, Optional

from ..models.tags import (
    Tag, TagSpec, TagCategory, ArgumentQueue, Context,
    ParserDirective, StylingTag, InsertingTag, RESERVED_TAGS,
)
from ..models.component import (
    Style, TextColor, NAMED_COLORS, TextDecoration, ClickAction, ClickEvent,
    HoverAction, HoverEvent, ShowItem, ShowEntity,
    TranslatableComponent, KeybindComponent, text,
)
from .gradients import GradientTag, RainbowTag


COLOR_ALIASES: Dict[str, TextColor] = {
    "grey": NAMED_COLORS["gray"],
    "dark_grey": NAMED_COLORS["dark_gray"],
}

DECORATION_ALIASES: Dict[TextDecoration, List[str]] = {
    TextDecoration.OBFUSCATED: ["obf"],
    TextDecoration.BOLD: ["b"],
    TextDecoration.STRIKETHROUGH: ["st"],
    TextDecoration.UNDERLINED: ["u"],
    TextDecoration.ITALIC: ["em", "i"],
}

NEGATE = "!"

_KEY_PATTERN = re.compile(r'^(?:[a-z0-9_.-]+:)?[a-z0-9_./-]+$')


def color_resolve(color_name: str, context: Context, arguments=()) -> TextColor:
    """
    Parse a named, aliased or #rrggbb colour

    Raises:
        ParsingError: If the name is not a colour
    """
    name = color_name.lower()
    if name in COLOR_ALIASES:
        color = COLOR_ALIASES[name]
    elif name.startswith("#"):
        color = TextColor.from_hex_string(name)
    else:
        color = NAMED_COLORS.get(name)
    if color is None:
        raise context.new_error(
            f"Unable to parse a color from '{color_name}'. "
            f"Please use named colours or hex (#RRGGBB) colors.",
            arguments,
        )
    return color


def key_check(value: str, context: Context, arguments: ArgumentQueue) -> str:
    if not _KEY_PATTERN.match(value):
        raise context.new_error(f"'{value}' is not a valid key", arguments)
    return value


class TagRegistry:
    """
    Registry of tag specifications

    Maps tag names and aliases to TagSpec objects. Specs with a matcher
    (colours such as <#ff00aa>) are tried after the direct lookup.

    Example:
        >>> registry = TagRegistry()
        >>> registry.exists("bold"), registry.exists("#00ff00"), registry.exists("blink")
        (True, True, False)
    """

    def __init__(self) -> None:
        """Initialize the registry and register all standard tags"""
        self.specs: Dict[str, TagSpec] = {}
        self.colorTags_register()
        self.decorationTags_register()
        self.eventTags_register()
        self.insertionTags_register()
        self.componentTags_register()
        self.modifyingTags_register()
        self.directiveTags_register()

    def register(self, spec: TagSpec) -> None:
        """Register a tag specification under its name and aliases"""
        self.specs[spec.name] = spec
        for alias in spec.aliases:
            self.specs[alias] = spec

    def spec_get(self, name: str) -> Optional[TagSpec]:
        """Get the specification handling a tag name"""
        name = name.lower()
        if name in self.specs:
            return self.specs[name]
        for spec in self.specs.values():
            if spec.matcher is not None and spec.matches(name):
                return spec
        return None

    def exists(self, name: str) -> bool:
        return self.spec_get(name) is not None

    def resolve(self, name: str, arguments: ArgumentQueue, context: Context) -> Optional[Tag]:
        """
        Build a fresh tag instance

        Returns:
            The tag, or None if the name is not registered

        Raises:
            ParsingError: If the factory rejects the arguments
        """
        spec = self.spec_get(name)
        if spec is None:
            return None
        return spec.factory(name.lower(), arguments, context)

    def tags_listByCategory(self, category: TagCategory) -> List[TagSpec]:
        """Get all tags in a category, each once"""
        seen: List[TagSpec] = []
        for spec in self.specs.values():
            if spec.category == category and all(spec is not s for s in seen):
                seen.append(spec)
        return seen

    def colorTags_register(self) -> None:
        """Register <red>, <#rrggbb> and <color:...>"""
        long_forms = ("color", "colour", "c")

        def color_factory(name: str, args: ArgumentQueue, ctx: Context) -> Tag:
            if name in long_forms:
                name = args.pop_or("Expected to find a color parameter: <name>|#RRGGBB").lower_value()
            return StylingTag(Style(color=color_resolve(name, ctx, args)))

        def color_matches(name: str) -> bool:
            return (
                name in NAMED_COLORS
                or name in COLOR_ALIASES
                or TextColor.from_hex_string(name) is not None
            )

        self.register(TagSpec(
            name="color",
            category=TagCategory.COLOR,
            description="Text colour: named, #rrggbb, or <color:...>",
            factory=color_factory,
            aliases=["colour", "c"],
            matcher=color_matches,
            examples=["<red>text", "<#ff00aa>text", "<color:gold>text"],
        ))

    def decorationTags_register(self) -> None:
        """Register <bold>, <italic> ... including the <!bold> negated forms"""

        def make_decoration_factory(decoration: TextDecoration):
            """Factory for one decoration"""
            def factory(name: str, args: ArgumentQueue, ctx: Context) -> Tag:
                if name.startswith(NEGATE):
                    state = False
                else:
                    state = not args.has_next() or not args.pop().is_false()
                return StylingTag(Style().with_decoration(decoration, state))
            return factory

        for decoration in TextDecoration:
            names = [decoration.value] + DECORATION_ALIASES[decoration]
            self.register(TagSpec(
                name=decoration.value,
                category=TagCategory.DECORATION,
                description=f"Set or clear the {decoration.value} decoration",
                factory=make_decoration_factory(decoration),
                aliases=names[1:] + [NEGATE + n for n in names],
                examples=[f"<{names[-1]}>text", f"<{decoration.value}:false>text", f"<!{decoration.value}>text"],
            ))

    def eventTags_register(self) -> None:
        """Register <click> and <hover>"""

        def click_factory(name: str, args: ArgumentQueue, ctx: Context) -> Tag:
            action_name = args.pop_or("A click tag requires an action of one of "
                                      + ", ".join(a.value for a in ClickAction)).lower_value()
            try:
                action = ClickAction(action_name)
            except ValueError:
                raise ctx.new_error(f"Unknown click event action '{action_name}'", args)
            value = args.pop_or("Click event actions require a value").value
            return StylingTag(Style(click_event=ClickEvent(action, value)))

        def hover_factory(name: str, args: ArgumentQueue, ctx: Context) -> Tag:
            action_name = args.pop_or("Hover event requires an action as its first argument").lower_value()
            try:
                action = HoverAction(action_name)
            except ValueError:
                raise ctx.new_error(f"Don't know how to turn '{action_name}' into a hover event", args)

            if action is HoverAction.SHOW_TEXT:
                value = ctx.deserialize(args.pop_or("show_text action requires a message").value)
            elif action is HoverAction.SHOW_ITEM:
                item = key_check(args.pop_or("Show item hover needs at least an item ID").value, ctx, args)
                count = 1
                if args.has_next():
                    count = args.pop().as_int()
                    if count is None:
                        raise ctx.new_error("The count argument was not a valid integer", args)
                value = ShowItem(item, count)
            else:
                entity_type = key_check(args.pop_or("Show entity needs a type argument").value, ctx, args)
                entity_id = args.pop_or("Show entity needs an entity UUID").value
                try:
                    uuid.UUID(entity_id)
                except ValueError:
                    raise ctx.new_error(f"'{entity_id}' is not a valid UUID", args)
                entity_name = ctx.deserialize(args.pop().value) if args.has_next() else None
                value = ShowEntity(entity_type, entity_id, entity_name)

            return StylingTag(Style(hover_event=HoverEvent(action, value)))

        self.register(TagSpec(
            name="click",
            category=TagCategory.EVENT,
            description="Click event: <click:action:value>",
            factory=click_factory,
            examples=["<click:run_command:/help>help</click>", "<click:open_url:https://example.org>site"],
        ))

        self.register(TagSpec(
            name="hover",
            category=TagCategory.EVENT,
            description="Hover event; the show_text value is itself markup",
            factory=hover_factory,
            examples=["<hover:show_text:'<red>hi'>text</hover>", "<hover:show_item:diamond:3>item"],
        ))

    def insertionTags_register(self) -> None:
        """Register <insert> and <font>"""

        def insertion_factory(name: str, args: ArgumentQueue, ctx: Context) -> Tag:
            value = args.pop_or("A value is required to produce an insertion component").value
            return StylingTag(Style(insertion=value))

        def font_factory(name: str, args: ArgumentQueue, ctx: Context) -> Tag:
            key = args.pop_or("A font tag must have either arguments of either <value> or <namespace:value>").value
            if args.has_next():
                key = key + ":" + args.pop().value
            return StylingTag(Style(font=key_check(key, ctx, args)))

        self.register(TagSpec(
            name="insert",
            category=TagCategory.INSERTION,
            description="Text inserted into the chat box on shift-click",
            factory=insertion_factory,
            aliases=["insertion"],
            examples=["<insert:/help>click me"],
        ))

        self.register(TagSpec(
            name="font",
            category=TagCategory.INSERTION,
            description="Font key, optionally namespaced",
            factory=font_factory,
            examples=["<font:uniform>text", "<font:minecraft:alt>text"],
        ))

    def componentTags_register(self) -> None:
        """Register tags that insert their own component"""

        def translatable_factory(name: str, args: ArgumentQueue, ctx: Context) -> Tag:
            key = args.pop_or("A translation key is required").value
            with_args = []
            while args.has_next():
                with_args.append(ctx.deserialize(args.pop().value))
            return InsertingTag(TranslatableComponent(key=key, args=tuple(with_args)))

        def keybind_factory(name: str, args: ArgumentQueue, ctx: Context) -> Tag:
            keybind = args.pop_or("A keybind id is required").value
            return InsertingTag(KeybindComponent(keybind=keybind), children=False)

        def newline_factory(name: str, args: ArgumentQueue, ctx: Context) -> Tag:
            return InsertingTag(text("\n"), children=False)

        self.register(TagSpec(
            name="lang",
            category=TagCategory.COMPONENT,
            description="Translatable component; further arguments are markup",
            factory=translatable_factory,
            aliases=["tr", "translate"],
            examples=["<lang:block.minecraft.diamond_block>", "<tr:chat.type.text:'<red>Steve':hi>"],
        ))

        self.register(TagSpec(
            name="key",
            category=TagCategory.COMPONENT,
            description="Keybind component",
            factory=keybind_factory,
            examples=["Press <key:key.jump> to jump"],
        ))

        self.register(TagSpec(
            name="newline",
            category=TagCategory.COMPONENT,
            description="Line break",
            factory=newline_factory,
            aliases=["br"],
            examples=["one<newline>two", "one<br>two"],
        ))

    def modifyingTags_register(self) -> None:
        """Register the colour-changing tags"""

        self.register(TagSpec(
            name=GradientTag.NAME,
            category=TagCategory.MODIFYING,
            description="Colour gradient across the content",
            factory=lambda name, args, ctx: GradientTag.create(args, ctx),
            examples=["<gradient>text", "<gradient:red:blue>text", "<gradient:#ff0000:gold:0.5>text"],
        ))

        self.register(TagSpec(
            name=RainbowTag.NAME,
            category=TagCategory.MODIFYING,
            description="Rainbow across the content; '!' reverses, an integer shifts the phase",
            factory=lambda name, args, ctx: RainbowTag.create(args, ctx),
            examples=["<rainbow>text", "<rainbow:!>text", "<rainbow:2>text"],
        ))

    def directiveTags_register(self) -> None:
        """
        Register reserved parser directives

        The parser acts on these by name; they never reach the tree.
        """
        names = sorted(RESERVED_TAGS, key=len, reverse=True)
        self.register(TagSpec(
            name=names[0],
            category=TagCategory.DIRECTIVE,
            description="Close every open tag (not allowed in strict mode)",
            factory=lambda name, args, ctx: ParserDirective.RESET,
            aliases=names[1:],
            examples=["<red>red<reset>plain"],
        ))
