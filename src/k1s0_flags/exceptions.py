"""flags ライブラリの例外型定義"""

from __future__ import annotations


class FlagError(Exception):
    """flags ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class FlagErrorCodes:
    """FlagError のエラーコード定数。"""

    RESOURCE_NOT_FOUND: str = "RESOURCE_NOT_FOUND"
    NULL_RESOURCE: str = "NULL_RESOURCE"
    SERIALIZATION_ERROR: str = "SERIALIZATION_ERROR"
    UNKNOWN_FLAG: str = "UNKNOWN_FLAG"
    TYPE_MISMATCH: str = "TYPE_MISMATCH"
    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"


class ResourceNotFoundError(FlagError):
    """リソース参照が存在しない場合のエラー。"""

    def __init__(self, resource_id: int, cause: Exception | None = None) -> None:
        super().__init__(
            FlagErrorCodes.RESOURCE_NOT_FOUND,
            f"Resource not found: {resource_id}",
            cause,
        )
        self.resource_id = resource_id


class NullResourceError(FlagError):
    """リソースは存在するが内容が None の場合のエラー。"""

    def __init__(self, resource_id: int) -> None:
        super().__init__(
            FlagErrorCodes.NULL_RESOURCE,
            f"Resource has no content: {resource_id}",
        )
        self.resource_id = resource_id


class SerializationError(FlagError):
    """保存値のエンコード・デコードに失敗した場合のエラー。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(FlagErrorCodes.SERIALIZATION_ERROR, message, cause)


class UnknownFlagError(FlagError):
    """フラグテーブルの整合性エラー（重複登録など）。"""

    def __init__(self, message: str) -> None:
        super().__init__(FlagErrorCodes.UNKNOWN_FLAG, message)


class FlagTypeError(FlagError):
    """フラグの型とアクセサが一致しない場合のエラー。"""

    def __init__(self, message: str) -> None:
        super().__init__(FlagErrorCodes.TYPE_MISMATCH, message)
