# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""GraphQL documents sent to the zvuk.com GraphQL endpoint."""

GET_BOOK_CHAPTERS_OPERATION = "getBookChapters"
GET_STREAM_OPERATION = "getStream"

GET_BOOK_CHAPTERS_QUERY = """
query getBookChapters($ids: [ID!]!) {
  getBooks(ids: $ids) {
    title
    mark
    explicit
    chapters {
      ...PlayerChapterData
    }
  }
}

fragment PlayerChapterData on Chapter {
  id
  title
  availability
  duration
  childParam
  image {
    src
  }
  book {
    id
    title
    mark
    explicit
  }
  bookAuthors {
    id
    rname
    image {
      src
    }
  }
  position
  __typename
}
"""

# quality is one of auto, hq, hifi, sq
GET_STREAM_QUERY = """
query getStream($ids: [ID!]!, $quality: String, $encodeType: String, $includeFlacDrm: Boolean!) {
  mediaContents(ids: $ids, quality: $quality, encodeType: $encodeType) {
    ... on Track {
      __typename
      stream {
        expire
        high
        mid
        flacdrm @include(if: $includeFlacDrm)
      }
    }
    ... on Episode {
      __typename
      stream {
        expire
        mid
      }
    }
    ... on Chapter {
      __typename
      stream {
        expire
        mid
      }
    }
  }
}
"""


def build_payload(query: str, operation: str, variables: dict) -> dict:
    """Build a GraphQL request body."""
    return {
        "query": query,
        "variables": variables,
        "operationName": operation,
    }
