# models/base_models.py

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ResultModel(BaseModel):
    """
    分析結果系モデルの共通ベース。
    - 属性名は snake_case、JSON は camelCase（フロント側の既存 payload に合わせる）
    - 一度返した結果は書き換えない前提なので frozen にしておく
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )
